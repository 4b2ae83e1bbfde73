"""
borderwait: crowdsourced congestion estimates for border checkpoints.
"""
