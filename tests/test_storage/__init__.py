"""
Storage module tests for the Delegate Framework.

Tests cover:
- Type definitions and Pydantic validation (test_types.py)
- Irys node HTTP client and Solana funding transfers (test_node.py, test_funder.py)
- Pipeline steps (test_cost.py, test_funding.py, test_uploader.py, test_verifier.py)
- Node fallback orchestration (test_orchestrator.py)
- ArweaveClient facade (test_arweave_client.py)
"""
