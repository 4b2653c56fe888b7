"""Top-level package for the Expense Tracker.

This file makes the directory a Python package and exposes
convenient names.  The primary modules are:

* ``expense`` – the expense record, its validation and line format
* ``store`` – the in-memory store with file persistence and aggregates
* ``categories`` – the static category catalog
* ``charts`` – text charts for terminal and code-block display
* ``visualization`` – functions that generate Plotly figures
* ``app`` – a Streamlit app that ties everything together

To run the app from the command line you can execute:

```bash
streamlit run expense_tracker/app.py
```
"""

from .expense import Expense, ExpenseResult, ParseError, ValidationError, build_expense
from .store import ExpenseStore

__all__ = [
    "Expense",
    "ExpenseResult",
    "ExpenseStore",
    "ParseError",
    "ValidationError",
    "build_expense",
]
