"""Storefront backend-for-frontend"""
