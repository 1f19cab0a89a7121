"""Payroll Calc command-line interface."""
