"""Domain layer for taxledger.

Import services from their modules (``taxledger.domain.accounting`` etc.).
The package itself imports nothing so that ``taxledger.database`` can load
``taxledger.domain.entities`` without pulling in the services that depend
on the database interface.
"""
