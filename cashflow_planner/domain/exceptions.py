"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidStrategyError(DomainException, ValueError):
    """Payoff strategy is not one of the supported orderings"""

    pass
