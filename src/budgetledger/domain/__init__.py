"""Domain layer for budgetledger application.

Services live in their own modules and are imported from there, since the
database layer imports domain entities while it initializes.
"""
