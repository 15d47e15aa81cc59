#!/usr/bin/env python3
import sys, json
from sepay import Signer, build_message


def main():
    data = json.loads(sys.stdin.read())
    secret_key = data.pop("secret_key", "")
    fields = {k: ("" if v is None else str(v)) for k, v in data.items()}
    signer = Signer(secret_key)
    print(json.dumps({"message": build_message(fields), "signature": signer.sign(fields)}))

if __name__ == "__main__":
    main()
