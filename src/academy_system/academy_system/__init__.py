"""Gymnastics Academy management package.

This package is organized by feature modules (coaches, attendance, pt,
payroll, students, finance, ...) with a thin Flask controller layer and
service/repository layers backed by Supabase.
"""
