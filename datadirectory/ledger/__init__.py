"""
The metadata ledger: record model, CSV codec, directory scanner and validator.

Flow: scanner or codec produces records, the validator checks them against
the directory context and the catalog index, the codec writes them back out.
"""
