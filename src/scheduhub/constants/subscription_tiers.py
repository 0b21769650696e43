"""
Centralized subscription tier configuration constants.

Every tier limit lives here so the entitlement table, the pricing endpoint and
the tests read the same numbers. ``None`` means the tier has no ceiling.
"""

# Basic Tier Configuration
BASIC_MAX_WORKSPACES = 1
BASIC_MAX_EMPLOYEES_PER_WORKSPACE = 8
BASIC_NAME = "Basic"

# Extended Tier Configuration
EXTENDED_MAX_WORKSPACES = 3
EXTENDED_MAX_EMPLOYEES_PER_WORKSPACE = 15
EXTENDED_NAME = "Extended"

# Unlimited Tier Configuration
UNLIMITED_MAX_WORKSPACES = None  # Unlimited
UNLIMITED_MAX_EMPLOYEES_PER_WORKSPACE = None  # Unlimited
UNLIMITED_NAME = "Unlimited"

# Display label for a limit without a ceiling
UNLIMITED_LABEL = "Unlimited"

# Translation key template used by the clients
TIER_NAME_KEY_TEMPLATE = "subscriptions.tiers.{tier}.name"

# Store product identifiers, must match the app store configuration
EXTENDED_MONTHLY_PRODUCT = "scheduhub_extended_monthly"
EXTENDED_ANNUAL_PRODUCT = "scheduhub_extended_annual"
UNLIMITED_MONTHLY_PRODUCT = "scheduhub_unlimited_monthly"
UNLIMITED_ANNUAL_PRODUCT = "scheduhub_unlimited_annual"

# Role id reserved for the workspace owner
OWNER_ROLE_ID = "1"
