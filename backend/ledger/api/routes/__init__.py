"""HTTP routes — /health, /v1/accounts, /v1/transactions.

Each module owns an APIRouter that main.py registers explicitly. Handlers only
decode the body, call a service under the request deadline, and shape the 201.
"""
