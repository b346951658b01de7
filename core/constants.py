# core/constants.py
ACCOUNT_TYPE_CHOICES = (
    ('customer', 'Customer'),   # Posts jobs and hires workers
    ('worker', 'Worker'),       # Offers services, negotiates in chat
    ('seller', 'Seller'),       # Runs a shop with products
)

ACCOUNT_STATUS_CHOICES = (
    ('approved', 'Approved'),
    ('suspended', 'Suspended'),
)

JOB_STATUS_CHOICES = (
    ('open', 'Open'),               # Posted, workers may negotiate
    ('in_progress', 'In Progress'), # A worker has been hired
    ('completed', 'Completed'),     # Customer confirmed the work is done
)

ESCROW_STATUS_CHOICES = (
    ('unpaid', 'Unpaid'),
    ('paid', 'Paid'),           # Payment verified, contact details unlocked
    ('released', 'Released'),   # Customer confirmed completion
)

PROPOSAL_STATUS_CHOICES = (
    ('pending', 'Pending'),
    ('accepted', 'Accepted'),
    ('rejected', 'Rejected'),
    ('withdrawn', 'Withdrawn'),  # Superseded by a newer proposal in the room
)

MESSAGE_TYPE_CHOICES = (
    ('text', 'Text'),
    ('proposal', 'Proposal'),
    ('system', 'System'),
)

PAYMENT_STATUS_CHOICES = (
    ('pending', 'Pending'),
    ('paid', 'Paid'),
    ('failed', 'Failed'),
)

DASHBOARD_BY_ACCOUNT_TYPE = {
    'worker': 'worker-dashboard',
    'customer': 'customer-dashboard',
    'seller': 'shops/manage',
}

ROOM_LIST_LIMIT = 50
MESSAGE_HISTORY_LIMIT = 100
ADMIN_LIST_LIMIT = 100
DASHBOARD_OPEN_JOBS_LIMIT = 6
