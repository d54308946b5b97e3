"""
SealVault Web Module
====================

Stateless HTTP surface over the envelope engine (Flask).
"""
