"""
Test suite for the Hospital Management System.

Contains service-level and API tests for registration, booking, the
appointment status workflow and user administration.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
