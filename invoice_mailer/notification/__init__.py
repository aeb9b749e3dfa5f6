"""Invoice notification delivery.

Renders an invoice record to a PDF document and delivers it, attached to
an HTML email, through an SMTP relay.
"""
