"""
Configuration of the socks5 client that the desktop app bootstraps. It holds the gateway the client uses and the paths
of the identity and encryption keys that the bandwidth vouchers are created with.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional

import encryption
import identity
from error import KeyRecoveryError

logger = logging.getLogger(__name__)

SOCKS5_CONFIG_ID = "nym-connect"
NYM_HOME_VAR = "NYM_HOME"
API_VALIDATOR_VAR = "API_VALIDATOR"
CONFIG_FILE_NAME = "config.json"

DEFAULT_LISTENING_PORT = 1080
DEFAULT_VALIDATOR_API = "http://localhost:8080"


class ConfigError(Exception):
    pass


def socks5_config_id_appended_with(gateway_id):
    """
    The config is stored under the id appended with the gateway so every gateway gets its own keys
    """
    return "%s-%s" % (SOCKS5_CONFIG_ID, gateway_id)


def parse_validators(raw):
    """
    :param raw: Comma separated urls of the validator apis
    :return: The list of the urls
    """
    return [url.strip() for url in raw.split(",") if url.strip()]


def default_root_directory():
    return Path(os.environ.get(NYM_HOME_VAR, Path.home() / ".nym")) / "socks5-clients"


@dataclass
class GatewayEndpoint:
    gateway_id: str
    gateway_owner: str
    gateway_listener: str


@dataclass
class Config:
    id: str
    provider_mix_address: str
    listening_port: int = DEFAULT_LISTENING_PORT
    validator_api_urls: List[str] = field(default_factory=lambda: [DEFAULT_VALIDATOR_API])
    gateway_endpoint: Optional[GatewayEndpoint] = None

    @staticmethod
    def config_directory(id):
        return default_root_directory() / id / "config"

    @staticmethod
    def data_directory(id):
        return default_root_directory() / id / "data"

    @staticmethod
    def config_file_location(id):
        return Config.config_directory(id) / CONFIG_FILE_NAME

    @property
    def private_identity_key_file(self):
        return Config.data_directory(self.id) / "private_identity.pem"

    @property
    def public_identity_key_file(self):
        return Config.data_directory(self.id) / "public_identity.pem"

    @property
    def private_encryption_key_file(self):
        return Config.data_directory(self.id) / "private_encryption.pem"

    @property
    def public_encryption_key_file(self):
        return Config.data_directory(self.id) / "public_encryption.pem"

    def set_custom_validator_apis(self, validator_api_urls):
        self.validator_api_urls = list(validator_api_urls)

    def with_gateway_endpoint(self, gateway_endpoint):
        self.gateway_endpoint = gateway_endpoint

    def save_to_file(self, path=None):
        """
        Save the config as json

        :param path: Where to save it, by default the config file location of the id
        :return: The path the config was saved to
        """
        path = Path(path) if path is not None else Config.config_file_location(self.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(asdict(self), f, indent=2)
        return path

    @classmethod
    def load_from_file(cls, id=None, path=None):
        """
        Load a config saved with save_to_file

        :param id: The id of the config, used to find the default location
        :param path: Explicit path of the file, overrides the id
        """
        if path is None:
            if id is None:
                raise ConfigError("Either the id or the path of the config is needed")
            path = Config.config_file_location(id)
        try:
            with open(path) as f:
                data = json.load(f)
            gateway = data.pop("gateway_endpoint", None)
            config = cls(**data)
        except (OSError, ValueError, TypeError) as err:
            raise ConfigError("Could not load the config from %s: %s" % (path, err)) from err
        if gateway is not None:
            config.gateway_endpoint = GatewayEndpoint(**gateway)
        return config

    def store_keys(self, identity_keys, encryption_keys):
        """
        Write the key pairs as base58 strings in the data directory
        """
        files = [
            (self.private_identity_key_file, identity_keys.private_key),
            (self.public_identity_key_file, identity_keys.public_key),
            (self.private_encryption_key_file, encryption_keys.private_key),
            (self.public_encryption_key_file, encryption_keys.public_key),
        ]
        for path, key in files:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(key.to_base58_string())

    def load_keys(self):
        """
        Load the keys the vouchers are created with

        :return: The identity and the encryption key pairs
        """
        try:
            identity_private = identity.PrivateKey.from_base58_string(
                self.private_identity_key_file.read_text().strip())
            encryption_private = encryption.PrivateKey.from_base58_string(
                self.private_encryption_key_file.read_text().strip())
        except (OSError, KeyRecoveryError) as err:
            raise ConfigError("Could not load the keys of %s: %s" % (self.id, err)) from err
        return identity.KeyPair.from_private_key(identity_private), \
            encryption.KeyPair.from_private_key(encryption_private)

    def has_keys(self):
        return self.private_identity_key_file.exists() and self.private_encryption_key_file.exists()


def setup_gateway(id, register, gateway):
    """
    Pick the gateway endpoint for the config

    :param id: The id of the config
    :param register: True if we use a new gateway, False to reuse the saved one
    :param gateway: The gateway the user chose, None to keep the existing one
    :return: The gateway endpoint
    """
    if register or gateway is not None:
        if gateway is None:
            raise ConfigError("A gateway is needed to register with")
        logger.debug("Using gateway %s", gateway.gateway_id)
        return gateway
    logger.info("Not registering gateway, will reuse existing config and keys")
    try:
        existing_config = Config.load_from_file(id)
    except ConfigError:
        logger.error("Unable to configure gateway. Seems like the client was already initialized but it was not "
                     "possible to read the existing configuration file. Consider backing up your gateway keys and "
                     "try force gateway registration, or removing the existing configuration and starting over.")
        raise
    if existing_config.gateway_endpoint is None:
        raise ConfigError("The existing config of %s has no gateway" % id)
    return existing_config.gateway_endpoint


def init_socks5_config(provider_address, gateway, force_register=False):
    """
    Create and save the config of the client for the given gateway. An existing config is overwritten but the keys are
    kept unless force_register is set

    :param provider_address: The address of the service provider
    :param gateway: The GatewayEndpoint the user chose
    :return: The saved config
    """
    logger.info("Initialising...")
    id = socks5_config_id_appended_with(gateway.gateway_id)
    location = Config.config_file_location(id)
    logger.debug("Attempting to use config file location: %s", location)
    already_init = location.exists()
    if already_init:
        logger.info("SOCKS5 client \"%s\" was already initialised before! Config information will be overwritten "
                    "(but keys will be kept)!", id)

    register_gateway = not already_init or force_register

    config = Config(id, provider_address)
    raw_validators = os.environ.get(API_VALIDATOR_VAR)
    if raw_validators:
        config.set_custom_validator_apis(parse_validators(raw_validators))

    config.with_gateway_endpoint(setup_gateway(id, register_gateway, gateway))
    if register_gateway or not config.has_keys():
        config.store_keys(identity.KeyPair.new(), encryption.KeyPair.new())
        logger.info("Saved all generated keys")

    try:
        saved_to = config.save_to_file()
    except OSError:
        logger.error("Failed to save the config file")
        raise
    logger.info("Saved configuration file to %s", saved_to)
    logger.info("Gateway id: %s", config.gateway_endpoint.gateway_id)
    logger.info("Gateway owner: %s", config.gateway_endpoint.gateway_owner)
    logger.info("Gateway listener: %s", config.gateway_endpoint.gateway_listener)
    logger.info("Service provider address: %s", config.provider_mix_address)
    logger.info("Service provider port: %s", config.listening_port)
    logger.info("Client configuration completed.")
    return config
