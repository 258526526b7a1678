"""Core domain package for quoteboard.

Core contains the record store, category index, selection and reconciliation
logic without any storage, HTTP, or UI specific code, keeping the business
logic portable.
"""
