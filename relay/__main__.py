import argparse
import os

from relay.config import DEFAULT_PORT


def main():
    parser = argparse.ArgumentParser(add_help=True, description="Voting contract relay")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", default=int(os.getenv("PORT", str(DEFAULT_PORT))), type=int)
    parser.add_argument(
        "--rpc-url",
        default=None,
        help="JSON-RPC endpoint of the chain node (overrides RPC_URL).",
    )
    parser.add_argument(
        "--contract-address",
        default=None,
        help="Deployed voting contract address (overrides CONTRACT_ADDRESS).",
    )
    parser.add_argument(
        "--abi-path",
        default=None,
        help="Path to a contract ABI or build artifact JSON (overrides CONTRACT_ABI_PATH).",
    )
    parser.add_argument("--log-level", default=None, help="RELAY_LOG_LEVEL override.")
    args = parser.parse_args()

    if args.rpc_url:
        os.environ["RPC_URL"] = args.rpc_url
    if args.contract_address:
        os.environ["CONTRACT_ADDRESS"] = args.contract_address
    if args.abi_path:
        os.environ["CONTRACT_ABI_PATH"] = args.abi_path
    if args.log_level:
        os.environ["RELAY_LOG_LEVEL"] = args.log_level

    import uvicorn

    uvicorn.run("relay.main:create_app", factory=True, host=args.host, port=args.port, reload=False)


if __name__ == "__main__":
    main()
