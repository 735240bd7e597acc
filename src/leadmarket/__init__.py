# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""LeadMarket core - lead marketplace between insurance lead providers and buyers.

Two engines live here:

- a multi-carrier auto quote rating engine (pure, deterministic pricing)
- the provider/buyer connection lifecycle and the lead ledger that gates
  submissions, accrues payouts and enforces lead volume caps
"""

__version__ = "0.1.0"
