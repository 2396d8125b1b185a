"""
Autonate: the Liberation Organization deployment kit.

Six conversational agents that give auto transport coordinators
their lives back, configured declaratively and shipped to Compute3.
"""

__version__ = "0.1.0"
__author__ = "Autonate"
