"""Sample Chaincode - asset contracts served through the router.

Each module exposes build_chaincode() for CHAINCODE_FACTORY.
"""
