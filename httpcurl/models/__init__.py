"""http-curl models package.

  - responses.py — response builders for POST /curl (200 result / plain, 400, 500)
"""
