"""Onboarding checkpoint tracker package.

This package is organized by feature modules (students, scans, journey,
analytics) with a thin Flask controller layer on top of service/repository
layers.
"""
