"""
FastAPI routers exposing the Alipay client.
"""
