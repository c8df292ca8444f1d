# SPDX-License-Identifier: Apache-2.0

"""
Contest Admin - team and participant management for programming contests.

Delegation heads may only create or modify teams and participants of their
own country; team categories are capped per country.
"""

__version__ = "1.0.0"
