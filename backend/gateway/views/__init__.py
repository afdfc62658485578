"""HTTP request handlers for the gateway server."""
