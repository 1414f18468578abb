"""
Workflows - the operations the CLI commands drive.

- deploy: send the contract creation tx and persist the DeploymentRecord
- draw:   drawCard() and report the token id from the CardDrawn event
- mint:   mintCard() a catalog card, then setCardMetadata() on the new token

Each returns a result value or raises a ``CardDrawError`` subclass; none
of them print.
"""
