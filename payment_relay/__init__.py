"""
Payment Relay - Paystack checkout relay with order/transaction reconciliation.

Components:
- Gateway client: initialize, verify, charge and OTP calls to Paystack
- Record store: atomic dual writes over the Transactions and Orders tables
- Checkout: charge, derive both records, persist them together
- Webhook reconciliation: map notified statuses onto the stored record pair
"""

__version__ = "1.0.0"
