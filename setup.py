from setuptools import find_packages, setup

if __name__ == "__main__":
    setup(
        name="picosign",
        version="0.1.0",
        description="EIP-191 / EIP-712 signing digests and secp256k1 signer recovery",
        python_requires=">=3.9",
        packages=find_packages(where="src"),
        package_dir={"": "src"},
        install_requires=[
            "coincurve>=18",
            "pycryptodome>=3.15",
        ],
        extras_require={
            "test": ["pytest>=7"],
        },
    )
