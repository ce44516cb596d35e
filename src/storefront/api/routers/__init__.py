"""
storefront.api.routers

Router modules; each service app mounts the subset it owns.
"""
