import argparse
import sys

from common.logging_setup import setup_logging
from common.models import Address
from common.settings import Settings, load_settings
from common.units import plain_decimal_string
from etl.pipeline import explore_addresses

def main(argv=None):
    p = argparse.ArgumentParser(description="Fetch and normalize address history from a block explorer")
    p.add_argument("addresses", nargs="+", help="Addresses to query")
    p.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    p.add_argument("--currency", default=None, help="Currency symbol (btc, ltc, bch, eth)")
    p.add_argument("--testnet", action="store_true", help="Query the test network")
    p.add_argument("--cash-address", dest="cash_address", default=None,
                   help="CashAddr form of a single Bitcoin Cash address")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = p.parse_args(argv)

    setup_logging(verbose=args.verbose)

    st = load_settings(args.config)
    updates = {}
    if args.currency:
        updates["currency"] = args.currency
    if args.testnet:
        updates["testnet"] = True
    if updates:
        st = Settings.model_validate({**st.model_dump(), **updates})

    if args.cash_address and len(args.addresses) != 1:
        p.error("--cash-address needs exactly one address")
    addresses = [Address(a, cash_address=args.cash_address) for a in args.addresses]

    failed = 0
    for outcome in explore_addresses(addresses, settings=st):
        if not outcome.ok:
            failed += 1
            print(f"{outcome.address} ERROR {outcome.error}")
            continue
        s = outcome.report.summary()
        print(f"{s['address']} {s['currency']} balance {s['balance']} funded {s['funded']} "
              f"spent {s['spent']} txs {s['tx_count']}")
        for tx in outcome.report.transactions:
            for op in tx.operations:
                print(f"  {tx.date} {tx.txid} {op.op_type.value} {plain_decimal_string(op.amount)} {op.address or '-'}")

    return 1 if failed else 0

if __name__ == "__main__":
    sys.exit(main())
