"""Domain layer for walletcycle.

Services are imported from their modules (e.g. ``walletcycle.domain.wallet``);
this package does not re-export them because they depend on
``walletcycle.database.base``, which itself imports the domain entities.
"""
