import sys, time

import jwt
from jwt.utils import base64url_decode
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

sys.path.append(__file__.rsplit("/", 2)[0])
import tokensig


def _rsa_pem_pair():

    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    priv = key.private_bytes(serialization.Encoding.PEM, serialization.PrivateFormat.PKCS8, serialization.NoEncryption())
    pub = key.public_key().public_bytes(serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo)
    return priv, pub


def benchmark(iterations=1000):

    payload = {
        "sub": "user_1234567890",
        "name": "Alice Smith",
        "roles": ["admin", "editor", "viewer"],
        "exp": int(time.time()) + 3600
    }

    def run_bench(label, func, iterations=iterations):

        # Warmup
        try:
            func()
        except Exception as e:
            print(f"{label:<25}: FAILED ({e})")
            return None

        start = time.perf_counter()
        for _ in range(iterations):
            func()
        end = time.perf_counter()
        avg = (end - start) / iterations * 1_000_000 # microseconds
        print(f"{label:<25}: {avg:8.2f} µs/op")
        return avg


    def compare_algo(alg_name, is_symmetric=False):

        print(f"\n[ {alg_name} ]")

        if is_symmetric:
            priv = pub = "a-shared-secret-long-enough-for-any-hmac-width-64-bytes-and-then-some"
            signer = tokensig.build_validator({alg_name: {"secret": priv}})
        else:
            priv, pub = _rsa_pem_pair()
            signer = tokensig.build_validator({alg_name: {"public": pub, "private": priv}})

        token = jwt.encode(payload, priv, algorithm=alg_name)
        signing_input, _, sig_b64 = token.rpartition(".")
        sig = base64url_decode(sig_b64)
        header = jwt.get_unverified_header(token)

        # Leaf validator vs full PyJWT decode (which also parses and checks claims)
        t_val = run_bench("tokensig Validate", lambda: signer.validate(header, signing_input, sig))
        p_dec = run_bench("PyJWT Decode", lambda: jwt.decode(token, pub, algorithms=[alg_name]))

        # Dispatch overhead
        kid = tokensig.KidValidator().register("k1", signer)
        algs = tokensig.SetValidator([kid])
        run_bench("tokensig Kid+Set", lambda: algs.validate({"alg": alg_name, "kid": "k1"}, signing_input, sig))

        run_bench("tokensig Digest", lambda: signer.digest(signing_input))

        if t_val and p_dec:
            print(f" >>> Validate vs decode: {p_dec/t_val:.1f}x")


    print(f"--- Benchmarking ({iterations} iterations) ---")

    compare_algo("HS256", is_symmetric=True)
    compare_algo("HS512", is_symmetric=True)
    compare_algo("RS256")
    compare_algo("RS512")


if __name__ == "__main__":

    benchmarks = (benchmark,
        )

    for benchmark in benchmarks:
        benchmark()
