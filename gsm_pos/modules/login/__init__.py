# gsm_pos/modules/login/__init__.py

"""
Login module package.

- LoginController (controller.py): signs users in / out and guards sale edits.
- PlaintextVerifier / HashedVerifier (verifiers.py): credential checks.
- User, Role, AuthFailure (model.py).
"""
