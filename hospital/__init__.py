"""
Hospital Management System

A FastAPI-based backend for a hospital: role-based accounts (admin, doctor,
patient, receptionist), doctor weekly schedules and appointment booking.
"""

__version__ = "1.0.0"
