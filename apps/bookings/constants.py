"""Static reference data for the hall booking form."""

EVENT_TYPES = [
    ("birthday", "Birthday Party"),
    ("wedding", "Wedding / Reception"),
    ("anniversary", "Anniversary"),
    ("corporate", "Corporate Event"),
    ("conference", "Conference / Seminar"),
    ("community", "Community Event"),
    ("funeral", "Funeral / Memorial Service"),
    ("other", "Other Event"),
]

SOUTH_AFRICAN_BANKS = [
    "ABSA Bank",
    "African Bank",
    "Capitec Bank",
    "Discovery Bank",
    "First National Bank (FNB)",
    "Investec",
    "Nedbank",
    "Standard Bank",
    "TymeBank",
    "Other",
]

HALL_BOOKING_STEPS = [
    (1, "Verification", "Login & estate resident verification"),
    (2, "Applicant Details", "Your contact information"),
    (3, "Event Details", "Date, time, guests, and requirements"),
    (4, "Bank Details", "For deposit refund after inspection"),
    (5, "Additional Info", "Music licensing & special requests"),
    (6, "Terms & Conditions", "Review and accept all terms"),
    (7, "Review", "Review your booking details"),
    (8, "Payment", "Pay the rental fee and refundable deposit"),
]

FIRST_STEP = 1
REVIEW_STEP = 7
PAYMENT_STEP = 8

TERMS_PAGES = 4

DOCUMENT_KINDS = {
    "bank_proof": "bank_proof_document_url",
    "music_license": "music_license_proof_url",
}
ALLOWED_DOCUMENT_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "application/pdf": "pdf",
}

BOOKING_REFERENCE_PREFIX = "RH"
