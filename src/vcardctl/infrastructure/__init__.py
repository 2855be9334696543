"""Infrastructure layer — barcode encoding and image files.

This layer depends on stdlib and third-party libs (qrcode, Pillow).
It must never import from domain, services, commands, or output.
The service layer bridges between domain models and infrastructure.
"""
