# src/chaindesk/cli/cli.py
import argparse
import asyncio
import sys
from typing import List, Optional

from ..api.client import ChainApiClient
from ..config.client_config import ClientConfig
from ..exceptions import ChainDeskError
from ..monitoring.logging_config import LogConfig
from ..utils.format import format_amount, shorten, wallet_label
from ..wallet.balances import WalletBook
from ..workflows.chain import ChainReconciler
from ..workflows.mining import MiningSession
from ..workflows.transaction import TransactionWorkflow

class CLI:
    def __init__(self):
        self.config: Optional[ClientConfig] = None
        self.client: Optional[ChainApiClient] = None

    def main(self, args: List[str]) -> int:
        parser = self.create_parser()
        args = parser.parse_args(args)

        if not hasattr(args, 'func'):
            parser.print_help()
            return 1

        self.config = ClientConfig(args.config)
        if args.base_url:
            self.config.config["api"]["base_url"] = args.base_url
        LogConfig(
            log_dir=self.config.get("logging.log_dir"),
            level=args.log_level or self.config.get("logging.level", "INFO")
        ).setup_logging()

        try:
            return asyncio.run(self._run(args)) or 0
        except ChainDeskError as e:
            print(f"Error: {e}")
            return 1

    async def _run(self, args) -> Optional[int]:
        self.client = ChainApiClient.from_url(self.config.base_url, self.config.timeout)
        async with self.client:
            return await args.func(args)

    def create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='chaindesk CLI')
        parser.add_argument('--config', default='config/client.yaml', help='Path to YAML config')
        parser.add_argument('--base-url', help='API base URL')
        parser.add_argument('--log-level', help='Log level (DEBUG, INFO, ...)')
        subparsers = parser.add_subparsers(title='commands', dest='command')

        status = subparsers.add_parser('status', help='Ping the API')
        status.set_defaults(func=self.show_status)

        # Wallet commands
        wallet_parser = subparsers.add_parser('wallet', help='Wallet operations')
        wallet_subparsers = wallet_parser.add_subparsers()

        list_wallets = wallet_subparsers.add_parser('list', help='List wallets with balances')
        list_wallets.set_defaults(func=self.list_wallets)

        create_wallet = wallet_subparsers.add_parser('create', help='Create new wallet')
        create_wallet.add_argument('--name', help='Wallet name')
        create_wallet.set_defaults(func=self.create_wallet)

        # Transaction commands
        tx_parser = subparsers.add_parser('tx', help='Transaction operations')
        tx_subparsers = tx_parser.add_subparsers()

        send_tx = tx_subparsers.add_parser('send', help='Build, sign and approve a transaction')
        send_tx.add_argument('sender', help='Sender address')
        send_tx.add_argument('receiver', help='Receiver address')
        send_tx.add_argument('amount', help='Amount to send')
        send_tx.add_argument('--fee', help='Optional fee')
        send_tx.add_argument('--note', default='', help='Optional note')
        send_tx.add_argument('--new-key', action='store_true', help='Sign with a freshly generated key')
        send_tx.set_defaults(func=self.send_transaction)

        mempool = subparsers.add_parser('mempool', help='Show pending transactions')
        mempool.set_defaults(func=self.show_mempool)

        # Mining commands
        mine = subparsers.add_parser('mine', help='Mine pending transactions')
        mine.add_argument('miner', help='Address receiving the reward')
        mine.set_defaults(func=self.mine_block)

        prize = subparsers.add_parser('prize', help='Show the current block reward')
        prize.set_defaults(func=self.show_prize)

        # Chain commands
        chain_parser = subparsers.add_parser('chain', help='Chain operations')
        chain_subparsers = chain_parser.add_subparsers()

        show_chain = chain_subparsers.add_parser('show', help='Show blocks')
        show_chain.set_defaults(func=self.show_chain)

        validate = chain_subparsers.add_parser('validate', help='Validate the chain')
        validate.set_defaults(func=self.validate_chain)

        edit = chain_subparsers.add_parser('edit', help="Edit a block's previous hash")
        edit.add_argument('index', type=int, help='Block index')
        edit.add_argument('previous_hash', help='New previous hash')
        edit.set_defaults(func=self.edit_block)

        remine = chain_subparsers.add_parser('remine', help='Remine a block and revalidate')
        remine.add_argument('index', type=int, help='Block index')
        remine.set_defaults(func=self.remine_block)

        return parser

    async def show_status(self, args):
        print(f"API status: {await self.client.get_status()}")

    async def list_wallets(self, args):
        book = WalletBook(self.client)
        for wallet in await book.refresh():
            pending = format_amount(wallet.pending_balance) if wallet.pending_balance is not None else '-'
            balance = format_amount(wallet.balance) if wallet.balance is not None else '-'
            print(f"{wallet_label(wallet)}  {wallet.address}  balance={balance}  pending={pending}")

    async def create_wallet(self, args):
        book = WalletBook(self.client)
        wallet = await book.create_wallet(args.name)
        print(f"New wallet {wallet.name or shorten(wallet.address)} created successfully.")
        print(f"Address: {wallet.address}")

    async def send_transaction(self, args) -> int:
        book = WalletBook(self.client)
        await book.refresh()
        workflow = TransactionWorkflow(self.client, book.wallets, on_success=book.refresh_balances)

        workflow.select_sender(args.sender)
        workflow.select_receiver(args.receiver)
        workflow.set_amount(args.amount)
        workflow.set_fee(args.fee)
        workflow.set_note(args.note)
        workflow.advance()

        if args.new_key:
            workflow.regenerate_key()
        if workflow.key_warning:
            print(f"Warning: {workflow.key_warning}")
        workflow.advance()

        result = await workflow.build_and_sign()
        print(f"Public key: {result.pub}")
        print(f"Signature: {result.sign}")
        workflow.advance()

        print(await workflow.approve())
        return 0

    async def show_mempool(self, args):
        transactions = await self.client.get_mempool()
        if not transactions:
            print("Mempool is empty.")
        for tx in transactions:
            print(f"{shorten(tx.sender)} -> {shorten(tx.receiver)}  {format_amount(tx.amount)}  fee={format_amount(tx.fee)}")

    async def mine_block(self, args):
        book = WalletBook(self.client)
        await book.refresh()
        session = MiningSession(self.client, book.wallets, on_success=book.refresh_balances)
        outcome = await session.mine(args.miner)
        print(outcome.message)

    async def show_prize(self, args):
        print(f"Current block reward: {format_amount(await self.client.get_prize())} coins")

    async def show_chain(self, args):
        reconciler = ChainReconciler(self.client)
        blocks = await reconciler.load()
        if not blocks:
            print("No blocks mined yet.")
        for block in blocks:
            print(f"Block #{block.index}  hash={block.hash}  previous={block.previous_hash}  txs={len(block.transactions)}")

    async def validate_chain(self, args) -> int:
        reconciler = ChainReconciler(self.client)
        await reconciler.load()
        validation = await reconciler.validate()
        print(validation.message)
        return 0 if validation.chain_valid else 2

    async def edit_block(self, args) -> int:
        failures = []
        reconciler = ChainReconciler(
            self.client,
            debounce_delay=self.config.debounce_seconds,
            on_update_error=lambda index, error: failures.append(error)
        )
        await reconciler.load()
        if reconciler.get_block(args.index) is None:
            print(f"Error: unknown block #{args.index}")
            return 1
        reconciler.edit_block(args.index, "previous_hash", args.previous_hash)
        await reconciler.flush()
        if failures:
            print(f"Failed to update chain: {failures[0]}")
            return 1
        print(f"Block #{args.index} previous hash updated.")
        return 0

    async def remine_block(self, args) -> int:
        reconciler = ChainReconciler(self.client)
        await reconciler.load()
        validation = await reconciler.remine(args.index)
        print(f"Block #{args.index} submitted for re-mining.")
        if validation is not None:
            print(validation.message)
            return 0 if validation.chain_valid else 2
        return 0

def main():
    cli = CLI()
    sys.exit(cli.main(sys.argv[1:]))

if __name__ == "__main__":
    main()
