"""Event log tests"""
