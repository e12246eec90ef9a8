from payledger.models.payment import PaymentEntry

__all__ = ["PaymentEntry"]
