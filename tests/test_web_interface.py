import unittest
from multisig_ledger.identity import OwnerKey
from web_interface.app import app


class TestWebInterface(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        app.config['TESTING'] = True
        self.client = app.test_client()

        self.owners = OwnerKey.generate_addresses(4)
        response = self.client.post('/api/create_wallet', json={
            'owners': self.owners,
            'initial_balance': 1_000
        })
        self.assertEqual(response.status_code, 200)
        self.wallet_id = response.get_json()['wallet_id']
        self.base = f'/api/wallet/{self.wallet_id}'

    def post(self, path, **body):
        return self.client.post(self.base + path, json=body)

    def test_create_wallet_from_members(self):
        response = self.client.post('/api/create_wallet', json={
            'members': [{'name': n} for n in ["Alice", "Bob", "Carol", "Dave"]]
        })
        data = response.get_json()

        self.assertTrue(data['success'])
        self.assertEqual(len(data['owners']), 4)
        self.assertEqual(data['owners'][0]['name'], "Alice")
        self.assertIn('private_key', data['owners'][0])
        self.assertEqual(data['threshold'], 2)

    def test_create_wallet_rejects_three_owners(self):
        response = self.client.post('/api/create_wallet', json={'owners': self.owners[:3]})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['code'], 'InvalidOwnerCount')

    def test_create_wallet_with_existing_owners(self):
        """Re-creating a wallet must not replace the existing one"""
        self.post('/transactions', caller=self.owners[0], destination='eve', amount=10)

        response = self.client.post('/api/create_wallet', json={
            'owners': list(reversed(self.owners)),
            'initial_balance': 0
        })
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()['wallet_id'], self.wallet_id)

        data = self.client.get(self.base).get_json()
        self.assertEqual(data['balance'], 1_000)
        self.assertEqual(data['transaction_count'], 1)

    def test_create_wallet_rejects_non_list_owners(self):
        for owners in ("abcd", {"a": 1}, 4):
            response = self.client.post('/api/create_wallet', json={'owners': owners})
            self.assertEqual(response.status_code, 400)
            self.assertFalse(response.get_json()['success'])

    def test_create_wallet_rejects_nested_identities(self):
        response = self.client.post('/api/create_wallet', json={
            'owners': self.owners[:3] + [["nested"]]
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['code'], 'InvalidOwner')

    def test_get_wallet(self):
        data = self.client.get(self.base).get_json()
        self.assertEqual(data['owners'], self.owners)
        self.assertEqual(data['balance'], 1_000)
        self.assertEqual(data['transaction_count'], 0)

    def test_unknown_wallet(self):
        self.assertEqual(self.client.get('/api/wallet/nope').status_code, 404)

    def test_full_flow(self):
        alice, bob, carol, _ = self.owners

        response = self.post('/transactions', caller=alice, destination=bob, amount=100)
        tx_index = response.get_json()['tx_index']
        self.assertEqual(tx_index, 0)

        self.assertTrue(self.post(f'/transactions/{tx_index}/confirm', caller=bob).get_json()['success'])
        self.assertTrue(self.post(f'/transactions/{tx_index}/confirm', caller=carol).get_json()['success'])

        confirmed = self.client.get(f'{self.base}/transactions/{tx_index}/confirmations/{carol}')
        self.assertTrue(confirmed.get_json()['confirmed'])

        response = self.post(f'/transactions/{tx_index}/execute', caller=alice)
        data = response.get_json()
        self.assertTrue(data['transaction']['executed'])
        self.assertEqual(data['balance'], 900)

        response = self.post(f'/transactions/{tx_index}/execute', caller=alice)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()['code'], 'AlreadyExecuted')

        kinds = [e['kind'] for e in self.client.get(f'{self.base}/events').get_json()['events']]
        self.assertEqual(kinds, ['submit', 'confirm', 'confirm', 'execute'])

    def test_error_statuses(self):
        alice = self.owners[0]

        response = self.post('/transactions', caller='outsider', destination=alice, amount=5)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.get_json()['code'], 'NotOwner')

        response = self.post('/transactions/7/confirm', caller=alice)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()['code'], 'TxNotFound')

        self.post('/transactions', caller=alice, destination=alice, amount=5)
        response = self.post('/transactions/0/execute', caller=alice)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()['code'], 'InsufficientConfirmations')

        response = self.post('/transactions/0/revoke', caller=alice)
        self.assertEqual(response.get_json()['code'], 'NotConfirmed')

        self.assertEqual(self.post('/transactions/0/cancel', caller=alice).status_code, 404)

    def test_deposit_and_list(self):
        response = self.post('/deposit', sender='donor', amount=250)
        self.assertEqual(response.get_json()['balance'], 1_250)

        response = self.post('/deposit', sender='donor', amount=-1)
        self.assertEqual(response.status_code, 400)

        self.post('/transactions', caller=self.owners[1], destination='eve', amount=10)
        transactions = self.client.get(f'{self.base}/transactions').get_json()['transactions']
        self.assertEqual(len(transactions), 1)
        self.assertEqual(transactions[0]['proposer'], self.owners[1])
        self.assertEqual(transactions[0]['confirmations'], [])


if __name__ == '__main__':
    unittest.main()
