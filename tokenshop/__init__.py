"""In-memory token shop: product ledger, per-token pricing and allowance-based purchases."""
