"""Data models for the RPC gateway"""
