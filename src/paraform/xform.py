## 4x4 homogeneous transformation matrices for paraform
## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## Copyright (c) 2025 paraform contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from math import *
import paraform.geom as geom

## A matrix is a list of four row vectors.  Vectors are column
## vectors, so ``M.mul(p)`` computes Mp.  Composition reads right to
## left: ``T.mul(R)`` rotates first, then translates.  Part placement
## in paraform is always built this way: per-part scale, then the
## part's own rotation and translation, then the model offset.


def _dot4(a,b):
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]+a[3]*b[3]

def _checknum(x):
    if not geom.isgoodnum(x):
        raise ValueError('bad element in matrix initialization: {}'.format(x))
    return x


class Matrix:
    """4x4 transformation matrix for homogeneous 3D coordinates"""

    def __init__(self,a=None):
        self.m = [[1,0,0,0],
                  [0,1,0,0],
                  [0,0,1,0],
                  [0,0,0,1]]

        if isinstance(a,Matrix):
            self.m = [list(r) for r in a.m]
        elif isinstance(a,(tuple,list)):
            if len(a) == 4 and all(isinstance(r,(tuple,list)) and len(r) == 4
                                   for r in a):
                self.m = [[_checknum(x) for x in r] for r in a]
            elif len(a) == 16:
                self.m = [[_checknum(a[i*4+j]) for j in range(4)]
                          for i in range(4)]
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        elif a is not None:
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))

    def __repr__(self):
        return "Matrix({},{},{},{})".format(self.m[0],self.m[1],
                                            self.m[2],self.m[3])

    def __eq__(self,other):
        if not isinstance(other,Matrix):
            return NotImplemented
        return all(geom.close(self.m[i][j],other.m[i][j])
                   for i in range(4) for j in range(4))

    def get(self,i,j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to get: {},{}'.format(i,j))
        return self.m[i][j]

    def getrow(self,i):
        if i < 0 or i > 3:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        return self.m[i]

    def getcol(self,j):
        if j < 0 or j > 3:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        return [self.m[0][j],
                self.m[1][j],
                self.m[2][j],
                self.m[3][j]]

    # matrix multiply.  If x is a matrix, compute MX.  If x is a
    # vector, compute Mx.  If x is a scalar, compute xM.
    def mul(self,x):
        if isinstance(x,Matrix):
            return Matrix([[_dot4(self.getrow(i),x.getcol(j))
                            for j in range(4)] for i in range(4)])
        elif geom.isvect(x):
            return [_dot4(self.m[i],x) for i in range(4)]
        elif geom.isgoodnum(x):
            return Matrix([geom.scale4(self.m[i],x) for i in range(4)])

        raise ValueError('bad thing passed to mul(): {}'.format(x))

    def isidentity(self):
        return self == Matrix()

    def determinant3(self):
        """determinant of the upper-left 3x3 block; negative for
        mirroring transforms, which flip face winding"""
        m = self.m
        return (m[0][0]*(m[1][1]*m[2][2]-m[1][2]*m[2][1])
                - m[0][1]*(m[1][0]*m[2][2]-m[1][2]*m[2][0])
                + m[0][2]*(m[1][0]*m[2][1]-m[1][1]*m[2][0]))

    def normalmatrix(self):
        """inverse transpose of the upper-left 3x3 block, as a Matrix,
        for transforming surface normals"""
        m = self.m
        det = self.determinant3()
        if abs(det) < geom.epsilon*geom.epsilon:
            raise ValueError('singular transform has no normal matrix')
        inv = [[ (m[1][1]*m[2][2]-m[1][2]*m[2][1])/det,
                -(m[0][1]*m[2][2]-m[0][2]*m[2][1])/det,
                 (m[0][1]*m[1][2]-m[0][2]*m[1][1])/det],
               [-(m[1][0]*m[2][2]-m[1][2]*m[2][0])/det,
                 (m[0][0]*m[2][2]-m[0][2]*m[2][0])/det,
                -(m[0][0]*m[1][2]-m[0][2]*m[1][0])/det],
               [ (m[1][0]*m[2][1]-m[1][1]*m[2][0])/det,
                -(m[0][0]*m[2][1]-m[0][1]*m[2][0])/det,
                 (m[0][0]*m[1][1]-m[0][1]*m[1][0])/det]]
        return Matrix([[inv[0][0],inv[1][0],inv[2][0],0],
                       [inv[0][1],inv[1][1],inv[2][1],0],
                       [inv[0][2],inv[1][2],inv[2][2],0],
                       [0,0,0,1]])


def compose(*mats):
    """compose matrices left to right as written, so ``compose(A, B, C)``
    is ABC and C is applied first"""
    result = Matrix()
    for m in mats:
        if m is None:
            continue
        result = result.mul(m)
    return result


# return the generalized 4x4 arbitrary axis rotation matrix.  Angles
# are in degrees.
def Rotation(axis,angle,inverse=False):
    m = geom.mag(axis)
    u = axis
    if m < geom.epsilon:
        raise ValueError('zero-length rotation axis not allowed')
    if not geom.close(m,1.0):
        u = geom.scale3(axis,1.0/m)

    if inverse:
        angle *= -1.0
    rad = (angle%360.0)*geom.pi2/360.0

    ux = u[0]
    uy = u[1]
    uz = u[2]

    cang = cos(rad)
    cmin = 1.0-cang
    sang = sin(rad)

    R = [[cang + ux*ux*cmin, ux*uy*cmin-uz*sang, ux*uz*cmin+uy*sang,0],
         [uy*ux*cmin+uz*sang, cang + uy*uy*cmin, uy*uz*cmin - ux*sang,0],
         [uz*ux*cmin-uy*sang, uz*uy*cmin+ux*sang, cang+uz*uz*cmin,0],
         [0,0,0,1]]

    return Matrix(R)

def Translation(delta,inverse=False):
    if inverse:
        delta = geom.scale3(delta,-1.0)
    T = [[1,0,0,delta[0]],
         [0,1,0,delta[1]],
         [0,0,1,delta[2]],
         [0,0,0,1]]
    return Matrix(T)

def Scale(x,y=None,z=None,inverse=False):
    if geom.isgoodnum(x):
        sx = x
        if geom.isgoodnum(y) and geom.isgoodnum(z):
            sy = y
            sz = z
        else:
            sy = sz = x
    elif isinstance(x,(tuple,list)) and len(x) >= 3:
        sx,sy,sz = x[0],x[1],x[2]
    else:
        raise ValueError('bad scaling values passed to Scale')

    if inverse:
        sx = 1.0/sx
        sy = 1.0/sy
        sz = 1.0/sz

    S = [[sx,0,0,0],
         [0,sy,0,0],
         [0,0,sz,0],
         [0,0,0,1.0]]
    return Matrix(S)
