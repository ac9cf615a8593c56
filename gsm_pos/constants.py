# gsm_pos/constants.py
from __future__ import annotations

STORE_NAME = "GSM Arena (Kwa Njoroo)"
STORE_TAGLINE = "Mobile Phone Repair & Accessories"
STORE_WHATSAPP_NUMBER = "254700000000"
CURRENCY = "Kshs"

# ---- storage ----
DATA_DIR = "data"
DB_FILE_NAME = "gsm_pos.db"
TABLE_SCHEMA_VERSION = "schema_version"
SCHEMA_VERSION = "1.0.0"

# One JSON document per collection, same key names the browser build used.
KEY_SALES = "gsm-sales"
KEY_TECHNICIANS = "gsm-technicians"
KEY_CSRS = "gsm-csrs"
KEY_SUPPLIERS = "gsm-suppliers"
KEY_PURCHASES = "gsm-purchases"
KEY_USERS = "gsm-users"
KEY_CURRENT_USER = "gsm-pos-user"
KEY_THEME = "gsm-pos-theme"

THEMES = ("light", "dark")
DEFAULT_THEME = "light"

# ---- receipts ----
RECEIPT_PREFIX = "GSM"
RECEIPT_DIGITS = 4

# ---- tax ----
VAT_RATE = 0.16
TURNOVER_TAX_RATE = 0.01

# ---- form catalogues ----
OTHER_OPTION = "Other"

LIPA_MDOGO_MDOGO_PLANS = ("Daily", "Weekly", "Monthly")

# ---- spreadsheets ----
IMPORT_SHEETS = ("Sales", "Purchases", "Suppliers", "Technicians", "CSRs")
