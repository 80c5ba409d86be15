# Plaintexts of the dummy backend live in the scalar field of the bn128 curve
bn128_scalar_field = 21888242871839275222246405745257275088548364400416034343698204186575808495617

cryptoparams = {
    'dummy-hom': {
        'key_bits': 248,
        'cipher_payload_bytes': 32,
        'cipher_chunk_size': 32,
        'rnd_bytes': 32,
        'rnd_chunk_size': 32,
    },

    # WARNING: Not cryptographically secure. Values retained for developer sanity.
    # Recommended values:
    # - key_bits: 2048
    # - cipher_payload_bytes: 4096 // 8
    # - rnd_bytes: 2048 // 8
    'paillier': {
        'key_bits': 320,  # 320-bit n
        'cipher_payload_bytes': 640 // 8,  # cipher is mod n^2, thus at most twice the bit length
        'cipher_chunk_size': 120 // 8,
        'rnd_bytes': 320 // 8,  # random value mod n, thus same size as n
        'rnd_chunk_size': 120 // 8,
    },
}
