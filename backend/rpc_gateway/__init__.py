"""Health-aware JSON-RPC gateway"""
