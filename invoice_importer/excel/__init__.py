"""Workbook reading and template generation."""
