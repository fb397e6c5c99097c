"""Utilities package for the ALICI ERP client."""
