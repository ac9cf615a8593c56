# gsm_pos/modules/sales/__init__.py

"""
Sales module package.

- record.py      Sale dataclass, enums and sale-type rules
- reducer.py     form transitions (sale type / payment method / field edits)
- validation.py  field-keyed error map and finalize_sale
- controller.py  SalesController (save, edit, status, delete, scan lookup)
- receipt.py     receipt text / HTML / PDF and WhatsApp links
- model.py       SalesTableModel (Qt)

Submodules are imported directly.
"""
