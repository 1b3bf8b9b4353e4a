from enum import IntEnum


class WizardStep(IntEnum):
    SERVICE_SELECTION = 1
    CUSTOMER_DETAILS = 2
    PAYMENT = 3
    SCHEDULING = 4
    CONFIRMATION = 5
