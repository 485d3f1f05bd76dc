#!/usr/bin/env python3
"""
Web interface for the multi-party authorization ledger
"""

import os

from flask import Flask, request, jsonify

from multisig_ledger.ledger import AuthorizationLedger
from multisig_ledger.environment import InMemoryEnvironment
from multisig_ledger.events import EventRecorder
from multisig_ledger.identity import OwnerKey
from multisig_ledger.errors import (
    AuthorizationError,
    MultisigError,
    PolicyViolation,
    CollaboratorError,
    StateConflict,
    TxNotFound,
)

app = Flask(__name__)
app.secret_key = os.environ.get('SECRET_KEY', 'demo_secret_key_change_in_production')

# Global storage (in production, use proper database)
wallets = {}
environments = {}
event_logs = {}


def _error_status(error: MultisigError) -> int:
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, TxNotFound):
        return 404
    if isinstance(error, (StateConflict, PolicyViolation, CollaboratorError)):
        return 409
    return 400


def _error_response(error: MultisigError):
    return jsonify({
        'success': False,
        'error': str(error),
        'code': type(error).__name__
    }), _error_status(error)


def _wallet_not_found():
    return jsonify({'success': False, 'error': 'Wallet not found'}), 404


def _transaction_info(ledger: AuthorizationLedger, tx_index: int) -> dict:
    info = ledger.get_transaction(tx_index).to_dict()
    info['index'] = tx_index
    info['confirmations'] = ledger.get_confirmations(tx_index)
    return info


@app.route('/api/create_wallet', methods=['POST'])
def create_wallet():
    """Create new multi-party wallet"""
    data = request.get_json(silent=True) or {}

    # Explicit identities, or generate keys for named members
    owners_info = []
    if 'owners' in data:
        owners = data['owners']
        if not isinstance(owners, list):
            return jsonify({'success': False, 'error': 'owners must be a list', 'code': 'InvalidOwner'}), 400
        owners_info = [{'address': owner} for owner in owners]
    else:
        owners = []
        for member_data in data.get('members', []):
            private_hex, address = OwnerKey.generate_key_pair()
            owners.append(address)
            owners_info.append({
                'name': member_data.get('name'),
                'address': address,
                'private_key': private_hex
            })

    try:
        environment = InMemoryEnvironment(data.get('initial_balance', 0))
        ledger = AuthorizationLedger(owners, environment)
    except MultisigError as e:
        app.logger.error("Creating wallet failed: %s", e)
        return _error_response(e)
    except (ValueError, TypeError) as e:
        return jsonify({'success': False, 'error': str(e)}), 400

    wallet_id = ledger.wallet_id
    if wallet_id in wallets:
        return jsonify({
            'success': False,
            'error': 'Wallet with these owners already exists',
            'wallet_id': wallet_id
        }), 409

    recorder = EventRecorder()
    ledger.subscribe(recorder)

    wallets[wallet_id] = ledger
    environments[wallet_id] = environment
    event_logs[wallet_id] = recorder

    app.logger.debug("Created wallet %s with %d owners", wallet_id, len(owners))

    return jsonify({
        'success': True,
        'wallet_id': wallet_id,
        'owners': owners_info,
        'threshold': ledger.threshold,
        'balance': environment.balance()
    })


@app.route('/api/wallet/<wallet_id>')
def get_wallet(wallet_id):
    """Get wallet information"""
    if wallet_id not in wallets:
        return _wallet_not_found()

    ledger = wallets[wallet_id]
    environment = environments[wallet_id]

    return jsonify({
        'wallet_id': wallet_id,
        'owners': ledger.get_owners(),
        'threshold': ledger.threshold,
        'balance': environment.balance(),
        'transaction_count': ledger.get_transaction_count(),
        'pending': [index for index, _ in ledger.get_pending_transactions()],
        'state_hash': ledger.state_hash()
    })


@app.route('/api/wallet/<wallet_id>/deposit', methods=['POST'])
def deposit(wallet_id):
    """Fund wallet"""
    if wallet_id not in wallets:
        return _wallet_not_found()

    data = request.get_json(silent=True) or {}
    try:
        balance = wallets[wallet_id].deposit(data.get('sender'), data.get('amount'))
    except MultisigError as e:
        return _error_response(e)

    return jsonify({'success': True, 'balance': balance})


@app.route('/api/wallet/<wallet_id>/transactions', methods=['POST'])
def submit_transaction(wallet_id):
    """Propose a transfer"""
    if wallet_id not in wallets:
        return _wallet_not_found()

    data = request.get_json(silent=True) or {}
    ledger = wallets[wallet_id]

    try:
        tx_index = ledger.submit(data.get('caller'), data.get('destination'), data.get('amount'))
    except MultisigError as e:
        return _error_response(e)

    return jsonify({'success': True, 'tx_index': tx_index})


@app.route('/api/wallet/<wallet_id>/transactions')
def list_transactions(wallet_id):
    """Get every submitted transaction"""
    if wallet_id not in wallets:
        return _wallet_not_found()

    ledger = wallets[wallet_id]
    transactions = [
        _transaction_info(ledger, index)
        for index in range(ledger.get_transaction_count())
    ]
    return jsonify({'transactions': transactions})


@app.route('/api/wallet/<wallet_id>/transactions/<int:tx_index>')
def get_transaction(wallet_id, tx_index):
    if wallet_id not in wallets:
        return _wallet_not_found()

    try:
        return jsonify(_transaction_info(wallets[wallet_id], tx_index))
    except MultisigError as e:
        return _error_response(e)


@app.route('/api/wallet/<wallet_id>/transactions/<int:tx_index>/<action>', methods=['POST'])
def transaction_action(wallet_id, tx_index, action):
    """Confirm, revoke or execute a transaction"""
    if wallet_id not in wallets:
        return _wallet_not_found()

    ledger = wallets[wallet_id]
    operations = {
        'confirm': ledger.confirm,
        'revoke': ledger.revoke,
        'execute': ledger.execute
    }
    if action not in operations:
        return jsonify({'success': False, 'error': f'Unknown action {action}'}), 404

    data = request.get_json(silent=True) or {}
    try:
        operations[action](data.get('caller'), tx_index)
    except MultisigError as e:
        app.logger.debug("%s on transaction %s rejected: %s", action, tx_index, e)
        return _error_response(e)

    return jsonify({
        'success': True,
        'transaction': _transaction_info(ledger, tx_index),
        'balance': environments[wallet_id].balance()
    })


@app.route('/api/wallet/<wallet_id>/transactions/<int:tx_index>/confirmations/<owner>')
def is_confirmed(wallet_id, tx_index, owner):
    if wallet_id not in wallets:
        return _wallet_not_found()

    return jsonify({'confirmed': wallets[wallet_id].is_confirmed(tx_index, owner)})


@app.route('/api/wallet/<wallet_id>/events')
def get_events(wallet_id):
    """Get delivered notifications"""
    if wallet_id not in event_logs:
        return _wallet_not_found()

    kind = request.args.get('kind')
    events = event_logs[wallet_id].get_events(kind)
    return jsonify({'events': [event.to_dict() for event in events]})


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 10000))
    app.run(
        host="0.0.0.0",
        port=port,
        debug=False
    )
