"""
Signing, param building, response interpretation, key loading and transport.
"""
