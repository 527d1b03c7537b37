"""Pipeline worker nodes: the base node and the analyze node."""