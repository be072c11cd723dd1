"""
BOS Sales Engine — Violation Codes
====================================
SAL-0xx: sales invoice. SAL-1xx: sales return.
"""


class SalesErrorCodes:
    # Sales invoice
    CREDIT_LIMIT_EXCEEDED = "SAL-001"
    CUSTOMER_BLACKLISTED = "SAL-002"
    ITEM_NOT_AVAILABLE = "SAL-003"
    NEGATIVE_STOCK = "SAL-004"

    # Sales return
    CUSTOMER_DID_NOT_BUY = "SAL-101"
    PRODUCT_NOT_RETURNABLE = "SAL-102"
    RETURN_PERIOD_EXCEEDED = "SAL-103"
