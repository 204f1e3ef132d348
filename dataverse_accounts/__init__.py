"""
Dataverse Accounts: list, create, edit and delete Dataverse account records
from a Streamlit page.
"""

__version__ = "0.1.0"
