"""Services for the RPC gateway"""
