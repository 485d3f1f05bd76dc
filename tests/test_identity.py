import unittest
from multisig_ledger.identity import OwnerKey
from multisig_ledger.ledger import AuthorizationLedger


class TestOwnerKey(unittest.TestCase):

    def test_key_pair(self):
        private_hex, address = OwnerKey.generate_key_pair()
        self.assertEqual(len(bytes.fromhex(private_hex)), 32)
        self.assertEqual(len(bytes.fromhex(address)), 20)

    def test_address_is_stable_for_key(self):
        private_hex, address = OwnerKey.generate_key_pair()
        key = OwnerKey(bytes.fromhex(private_hex))
        self.assertEqual(key.address, address)

    def test_compressed_public_key(self):
        public_hex = OwnerKey().get_public_key_hex()
        self.assertEqual(len(public_hex), 66)
        self.assertIn(public_hex[:2], ("02", "03"))

    def test_generated_addresses_build_a_wallet(self):
        owners = OwnerKey.generate_addresses(4)
        self.assertEqual(len(set(owners)), 4)

        ledger = AuthorizationLedger(owners)
        self.assertTrue(all(ledger.is_owner(owner) for owner in owners))


if __name__ == '__main__':
    unittest.main()
