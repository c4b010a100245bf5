"""
Retrieval and parsing of NWS gridpoint forecasts.

The client talks to api.weather.gov; the payload module turns the raw
JSON into typed forecast layers.
"""
