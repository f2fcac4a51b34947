#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2025 Confluent Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

# A simple example demonstrating blocking sends over mutual TLS.

import argparse
import logging

from kafka_bridge import BrokerError, ConnectionConfig, Producer, TlsMaterial


def tls_kwargs(args):
    if args.cert_dir is not None:
        tls = TlsMaterial.from_directory(args.cert_dir)
        return {'ca_location': tls.ca_location,
                'certificate_location': tls.certificate_location,
                'key_location': tls.key_location}
    return {'ca_location': args.ca,
            'certificate_location': args.cert,
            'key_location': args.key}


def main(args):
    topic = args.topic
    delimiter = args.delimiter
    config = ConnectionConfig.build(args.bootstrap_servers, **tls_kwargs(args))

    with Producer(config) as producer:
        print("Producing records to topic {}. ^C to exit.".format(topic))
        while True:
            try:
                msg = input(">").split(delimiter)
            except (KeyboardInterrupt, EOFError):
                break

            key, value = (msg[0], msg[1]) if len(msg) == 2 else (None, msg[0])
            try:
                receipt = producer.send(topic, value, key=key)
            except BrokerError as e:
                print("Delivery failed for record {}: {}".format(key, e))
                continue
            print('Record {} successfully produced to {} [{}] at offset {}'.format(
                key, topic, receipt.partition, receipt.offset))


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="mTLS producer example")
    parser.add_argument('-b', dest="bootstrap_servers", required=True,
                        help="Bootstrap broker(s) (host[:port])")
    parser.add_argument('-t', dest="topic", default="example_producer_mtls",
                        help="Topic name")
    parser.add_argument('-d', dest="delimiter", default="|",
                        help="Key-Value delimiter. Defaults to '|'")
    parser.add_argument('--cert-dir', dest="cert_dir",
                        help="Directory holding ca.crt, client.crt and client.key")
    parser.add_argument('--ca', dest="ca", help="CA certificate")
    parser.add_argument('--cert', dest="cert", help="Client certificate")
    parser.add_argument('--key', dest="key", help="Client private key")
    parser.add_argument('-v', dest="verbose", action='store_true',
                        help="Log librdkafka diagnostics")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    main(args)
