"""Webhook inbound system.

Receives pay_received notifications on POST /mc-pay.
Each webhook is signature-verified over the raw body, validated, and
recorded in the payment ledger.
"""
