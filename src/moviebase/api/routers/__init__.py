"""
moviebase.api.routers

HTTP routers: welcome/health, login, and user accounts.
"""
