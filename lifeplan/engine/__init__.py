# engine/__init__.py

# Tax calculator (one call per simulated year)
from .tax import TaxResult, compute_yearly_tax, net_income, tax_summary

# Projection engine and the reports derived from it
from .simulator import simulate_yearly
from .reports import capital_duration, summarize
from .validation import validate_inputs
from .runner import run_request
