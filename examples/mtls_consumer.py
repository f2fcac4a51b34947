#!/usr/bin/env python
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

#
# Example consumer reading a topic over mutual TLS, either as part of a
# consumer group or from an explicit partition and offset.
#

import argparse
import logging
import sys

from kafka_bridge import ConnectionConfig, Consumer, Message, PartitionEOF

if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="mTLS consumer example")
    parser.add_argument('-b', dest="bootstrap_servers", required=True,
                        help="Bootstrap broker(s) (host[:port])")
    parser.add_argument('-g', dest="group", required=True, help="Consumer group")
    parser.add_argument('-t', dest="topic", required=True, help="Topic name")
    parser.add_argument('--ca', dest="ca", help="CA certificate")
    parser.add_argument('--cert', dest="cert", help="Client certificate")
    parser.add_argument('--key', dest="key", help="Client private key")
    parser.add_argument('--earliest', action='store_true',
                        help="Start from the oldest message when the group has no committed offset")
    parser.add_argument('-p', dest="partition", type=int, help="Read this partition only")
    parser.add_argument('-o', dest="offset", type=int, default=0,
                        help="Offset to start at, used with -p")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    config = ConnectionConfig.build(args.bootstrap_servers,
                                    group_id=args.group,
                                    ca_location=args.ca,
                                    certificate_location=args.cert,
                                    key_location=args.key,
                                    offset_policy='earliest' if args.earliest else 'latest')

    c = Consumer(config)
    if args.partition is not None:
        c.subscribe_at_offset(args.topic, args.partition, args.offset)
    else:
        c.subscribe_by_topic(args.topic)

    # Read messages from Kafka, print to stdout
    try:
        while True:
            msg = c.poll(timeout=1.0)
            if msg is None:
                continue
            if isinstance(msg, PartitionEOF):
                # End of partition event
                sys.stderr.write('%% %s [%d] reached end at offset %d\n' %
                                 (msg.topic, msg.partition, msg.offset))
            elif isinstance(msg, Message):
                sys.stderr.write('%% %s [%d] at offset %d with key %s:\n' %
                                 (msg.topic, msg.partition, msg.offset, str(msg.key)))
                print(msg.value)

    except KeyboardInterrupt:
        sys.stderr.write('%% Aborted by user\n')

    finally:
        # Close down consumer to commit final offsets.
        c.close()
